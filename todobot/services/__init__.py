"""Business logic for authentication, tasks, notes and notifications."""