"""Cross-cutting application concerns: errors, dependencies, middleware, logging."""
