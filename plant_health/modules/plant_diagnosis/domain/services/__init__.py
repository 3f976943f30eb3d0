"""Pure domain services and gateway ports."""
