"""
RailLovable backend.

Chat turns in, generated website files out.
"""
