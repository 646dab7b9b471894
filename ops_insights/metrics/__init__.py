"""Pure per-record metric formulas shared by the analyzers."""
