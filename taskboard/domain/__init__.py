"""Domain layer for taskboard.

Pure models, derivation rules, value objects and events. Nothing in this
package performs I/O.
"""
