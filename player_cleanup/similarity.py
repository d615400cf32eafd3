"""
Edit-distance name similarity
"""


def levenshtein_distance(a: str, b: str) -> int:
    """
    Levenshtein distance with unit costs.

    Uses the full (len(b)+1) x (len(a)+1) matrix.
    """
    matrix = [[0] * (len(a) + 1) for _ in range(len(b) + 1)]

    for i in range(len(a) + 1):
        matrix[0][i] = i
    for j in range(len(b) + 1):
        matrix[j][0] = j

    for j in range(1, len(b) + 1):
        for i in range(1, len(a) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            matrix[j][i] = min(
                matrix[j - 1][i] + 1,         # deletion
                matrix[j][i - 1] + 1,         # insertion
                matrix[j - 1][i - 1] + cost,  # substitution
            )

    return matrix[len(b)][len(a)]


def similarity(a: str, b: str) -> float:
    """
    Normalized similarity in [0, 1]: (longest - distance) / longest.

    Two empty strings are identical (1.0).
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - levenshtein_distance(a, b)) / longest
