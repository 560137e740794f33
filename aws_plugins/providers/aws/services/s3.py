"""S3 service wrapper."""


def sort_by_last_modified_descending(objects):
    """Order S3 listing entries in place, newest ``LastModified`` first.

    Bubble sort with a strict comparison, so entries sharing a timestamp keep
    their input order. Listings are a single page (at most 1000 keys).
    """
    n = len(objects)
    swapped = True
    while swapped:
        swapped = False
        for i in range(n - 1):
            if objects[i]["LastModified"] < objects[i + 1]["LastModified"]:
                objects[i], objects[i + 1] = objects[i + 1], objects[i]
                swapped = True
        n -= 1
    return objects
