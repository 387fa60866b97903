"""Doctor-only patient roster and patient detail."""
