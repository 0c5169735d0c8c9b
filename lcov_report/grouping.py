"""Collapse uncovered line numbers into runs of consecutive lines."""


def group_consecutive(line_numbers) -> list[list[int]]:
    """Split an increasing sequence into maximal runs of consecutive integers.

    ``[1, 2, 3, 7, 8, 12]`` -> ``[[1, 2, 3], [7, 8], [12]]``
    """
    groups: list[list[int]] = []
    for number in line_numbers:
        if groups and number == groups[-1][-1] + 1:
            groups[-1].append(number)
        else:
            groups.append([number])
    return groups
