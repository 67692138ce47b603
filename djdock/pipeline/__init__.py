"""Bootstrap stage implementations.

Each stage takes the base or project path explicitly and returns what the
next stage needs; none of them change the process working directory.
"""
