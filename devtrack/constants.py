TASK_STATUSES = ("pending", "in-progress", "completed")
TASK_PRIORITIES = ("low", "medium", "high")

# Upper bound of the INTEGER time_spent column
MAX_TIME_SPENT = 2**31 - 1
