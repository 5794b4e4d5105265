"""Repository configuration and repository-building job options."""