"""TaskHub: task management API with real-time updates."""
