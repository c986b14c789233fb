"""Transport-agnostic core: ports, errors, notices and the shared AppState."""
