"""
Mock database package.

A connection that keeps grades in memory, plus a small table binding
that builds the SQL the connection understands.
"""
