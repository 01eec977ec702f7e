"""SQLite-backed storage for users, sessions, tasks and notes."""