"""
Demo script showing the rowframe DataFrame.

This script demonstrates:
1. Schema inference
2. Predicate joins, flat and nested
3. Rollups with summaries and alignment
4. Filtered in-place mutation
"""

import rowframe as rf
from rowframe import DataFrame

ships = [
    {"id": 1, "name": "Enterprise", "group_id": 1},
    {"id": 2, "name": "Defiant", "group_id": 2},
    {"id": 3, "name": "Voyager", "group_id": 1},
]
groups = [
    {"id": 1, "class": "Galaxy"},
    {"id": 2, "class": "Escort"},
]

# Example 1: Schema inference
print("=" * 60)
print("Example 1: Schema inference")
print("=" * 60)

df = DataFrame(ships)
print(df)
print(df.explain())

# Example 2: Joins
print("\n" + "=" * 60)
print("Example 2: Joins")
print("=" * 60)

on_group = lambda ship, group: ship["group_id"] == group["id"]
joined = df.join(DataFrame(groups), on_group, right={"prefix": "group"})
for row in joined.rows:
    print(row)

nested = df.nested_join(DataFrame(groups), on_group)
print("\nNested join schema:")
print(nested.explain())

# Example 3: Rollup with alignment
print("\n" + "=" * 60)
print("Example 3: Rollup with alignment")
print("=" * 60)

scores = DataFrame([
    {"team": "A", "period": "first", "score": 10},
    {"team": "A", "period": "second", "score": 12},
    {"team": "B", "period": "first", "score": 7},
])
aligned = scores.group_by("team").align("period").using({"score": 0}).rollup()
for row in aligned.rows:
    print(row)

totals = scores.group_by("team").summarize(lambda r: r["score"], {"total": sum, "n": rf.counter}).rollup()
print(totals.rows)

# Example 4: Filtered mutation
print("\n" + "=" * 60)
print("Example 4: Filtered mutation")
print("=" * 60)

df.where(lambda r: r["group_id"] == 2).update({"retired": True})
print(df.where(lambda r: r.get("retired")).select("name"))
print(df.columns)
