"""
Tailing and multiplexing engine.

Modules:
    - source: per-file followers with rotation handling
    - watcher: filesystem notification bridge into asyncio
    - registry: source ownership and color assignment
    - merger: fan-in of all sources into one delivery queue
    - formatter: output format modes and line rendering
    - sink: stdout and self-healing file outputs
    - geometry: terminal width tracking for table mode
    - engine: wiring and graceful shutdown
"""
