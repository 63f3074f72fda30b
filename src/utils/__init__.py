# Formatting and Discord message helpers
