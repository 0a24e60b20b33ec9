"""Study tracker: lesson discovery, progress, notes and reminders."""
