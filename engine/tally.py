"""End-of-session answer tally and the aptitude estimate for next time."""
from engine.performance import clamp


class SessionTally:
    """Correct / wrong / skipped counts plus a per-tag miss tally."""

    def __init__(self):
        self.correct = 0
        self.wrong = 0
        self.skipped = 0
        self.missed_tags = {}

    @property
    def total(self):
        return self.correct + self.wrong + self.skipped

    def record(self, is_correct, tags=(), skipped=False):
        """Count one outcome; wrong answers tally every tag of the problem."""
        if skipped:
            self.skipped += 1
            return
        if is_correct:
            self.correct += 1
            return
        self.wrong += 1
        for tag in tags or ():
            self.missed_tags[tag] = self.missed_tags.get(tag, 0) + 1

    def most_missed_tag(self):
        """Tag missed most often, '' when nothing was missed."""
        worst_tag, worst_count = '', 0
        for tag, count in self.missed_tags.items():
            if count > worst_count:
                worst_tag, worst_count = tag, count
        return worst_tag

    def aptitude_estimate(self):
        """Aptitude 1-10 from this session's accuracy (0.5 when empty)."""
        ratio = self.correct / self.total if self.total else 0.5
        return int(clamp(round(ratio * 10), 1, 10))

    def to_dict(self):
        return {
            'correct': self.correct,
            'wrong': self.wrong,
            'skipped': self.skipped,
            'missed_tags': dict(self.missed_tags),
        }
