"""
Mailer service package.

Outbound message composition and dispatch behind a pluggable transport.
"""
