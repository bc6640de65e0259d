"""Theme rendering for posts and expert pages."""
