"""Pure domain layer: document values, workflows, ownership and code formats.  Zero I/O."""
