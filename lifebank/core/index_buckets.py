"""Index Buckets — pure operations on the ordered ID lists behind secondary indexes.

Invariants:
    - Functions never mutate their input; they return a new list
    - append keeps creation order and never introduces a duplicate
    - remove deletes exactly one occurrence and preserves the order of the rest
"""


def append_to_bucket(bucket: list[int], record_id: int) -> list[int]:
    if record_id in bucket:
        return list(bucket)
    return [*bucket, record_id]


def remove_from_bucket(bucket: list[int], record_id: int) -> list[int]:
    """Linear scan-and-rebuild; a missing ID leaves the bucket unchanged."""
    rebuilt: list[int] = []
    removed = False
    for existing in bucket:
        if existing == record_id and not removed:
            removed = True
            continue
        rebuilt.append(existing)
    return rebuilt
