"""Knowledge graph extraction, validation and unification."""
