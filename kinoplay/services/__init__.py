"""
Application services layer (use cases).

Services orchestrate the domain logic to fulfill application use cases.
They coordinate between entities, ports, and external systems.

This layer contains:
- Continue-watching merge and shelf snapshot export
- Home screen aggregation (hero rotation, library names)
- Session / identity management
- Playback session state machine

Services depend on ports (interfaces) from core/, never on concrete
implementations from adapters/.
"""
