"""Field-mapping engine for autofilling job application forms."""
