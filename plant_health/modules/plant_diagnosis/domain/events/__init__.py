"""Domain events published after plant and treatment mutations, and their handlers."""
