"""Domain rules for quotes: entity shape, validation, filtering and seeding."""
