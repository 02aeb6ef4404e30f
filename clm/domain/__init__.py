"""Contract rules that do not touch the database: milestone offsets, contract
numbers, statuses and the column allow-lists used to build queries.
"""
