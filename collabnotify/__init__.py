"""Collab notifications package initializer.

Typed notification variants, their flattened wire codec and the persistence
helpers that store encoded notifications per recipient.
"""
