"""
Exchange Workflow

Core of the Secret Santa service: derangement, approval state machine,
at-rest codec, storage and notifications.
"""
