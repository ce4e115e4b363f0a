"""
Score helpers shared by quiz submission, certificates and notifications
"""


def round_half_up(value):
    """Round a non-negative percentage to the nearest integer, halves up"""
    return int(value + 0.5)


def score_percentage(score, max_score):
    """Whole percentage of score out of max_score, 0 when nothing could be scored"""
    if not max_score:
        return 0
    return round_half_up(score / max_score * 100)
