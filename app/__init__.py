"""Interactive front-ends for the clone detector."""
