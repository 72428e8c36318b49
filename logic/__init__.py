"""Domain logic: wardrobe state, persistence strategy, validation and navigation."""
