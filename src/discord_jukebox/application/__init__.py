"""
Application Layer

Orchestrates the domain through ports:
- interfaces/: Abstract ports for voice, chat and media resolution
- services/: The per-guild player and the command dispatcher
"""
