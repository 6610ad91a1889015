"""Domain layer — pure types, argument records, and matching rules.

Nothing in this package talks to the automation bridge.
"""
