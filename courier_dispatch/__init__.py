"""Restaurant courier dispatch simulation (threads + one shared delivery gate).

Orders are handed round-robin to a small fleet of couriers:
- each courier holds at most 3 orders and delivers them newest first
- a courier starts delivering as soon as its backlog is full
- a single shared gate lets only one courier deliver at a time
- delivery records can be printed, collected, or published over MQTT

See `python -m courier_dispatch.app -h` for how to run.
"""
