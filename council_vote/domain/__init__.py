"""Domain layer for the collegiate vote engine.

Holds the voter, ballot, tally and judgment-round models together with
the errors they raise. Nothing here performs I/O.
"""
