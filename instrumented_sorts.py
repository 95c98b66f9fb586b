#Instrumented comparison sorts
#
#Each engine sorts a list of ints in place and returns the exact number of
#basic operations it performed. Counts are deterministic for a given input.


def selection_sort(a):
    """
    Sort `a` in place with selection sort and return the operation count.

    Cost model:
    - one operation per comparison a[j] < a[min_index] while scanning
      the unsorted suffix (n-1-i comparisons on pass i)
    - three operations per pass that actually swaps (three element writes)

    Ties never move the minimum index (strict <), so the count does not
    depend on how duplicates happen to be arranged.
    """
    n = len(a)
    comparisons = 0
    writes = 0

    for i in range(n - 1):
        min_index = i
        for j in range(i + 1, n):
            comparisons += 1
            if a[j] < a[min_index]:
                min_index = j

        if min_index != i:
            a[i], a[min_index] = a[min_index], a[i]
            writes += 3

    return comparisons + writes


def _merge(a, l, m, r):
    """
    Merge the sorted runs a[l..m] and a[m+1..r] (inclusive) back into a.

    Fresh buffers are allocated for each call, sized to each half.
    Returns the operations charged:
    - one per element copied into the buffers
    - two per interleave step (comparison + write)
    - two per drained element (loop check + write)
    """
    left = a[l:m + 1]
    right = a[m + 1:r + 1]
    n1 = len(left)
    n2 = len(right)
    ops = n1 + n2

    i = j = 0
    k = l
    while i < n1 and j < n2:
        #<= keeps equal keys from the left run first (stability)
        if left[i] <= right[j]:
            a[k] = left[i]
            i += 1
        else:
            a[k] = right[j]
            j += 1
        ops += 2
        k += 1

    while i < n1:
        a[k] = left[i]
        ops += 2
        i += 1
        k += 1

    while j < n2:
        a[k] = right[j]
        ops += 2
        j += 1
        k += 1

    return ops


def _merge_sort_range(a, l, r):
    if l >= r:
        return 0

    #Left half takes the extra element on odd lengths
    m = l + (r - l) // 2
    ops = _merge_sort_range(a, l, m)
    ops += _merge_sort_range(a, m + 1, r)
    ops += _merge(a, l, m, r)
    return ops


def merge_sort(a):
    """
    Sort `a` in place with top-down merge sort and return the operation count.

    The sort is stable. Every merge of a range of length k costs exactly 3k
    operations, so the total only depends on len(a), not on its contents.
    """
    if not a:
        return 0
    return _merge_sort_range(a, 0, len(a) - 1)


def run_once(sort_fn, arr):
    """
    Sort a copy of `arr` with `sort_fn`.

    Returns (sorted_copy, operation_count); `arr` itself is left untouched.
    Used for small illustrative runs where the caller wants to keep the
    original around for display.
    """
    a = list(arr)
    ops = sort_fn(a)
    return a, ops


__all__ = [
    'selection_sort',
    'merge_sort',
    'run_once',
]
