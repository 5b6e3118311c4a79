"""Application layer - vote resolution use cases.

Services here turn ballots into decisions and drive the judgment-round
stage machine. They depend only on the domain layer.
"""
