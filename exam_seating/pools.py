import random


class Pool:
    """Shuffled queue of students for one (year, cohort) pair.

    ``index`` is the read cursor; students before it have been seated.
    """

    def __init__(self, year, is_reference, students=None):
        self.year = year
        self.is_reference = is_reference
        self.students = list(students or [])
        self.index = 0

    @property
    def key(self):
        return (self.year, self.is_reference)

    @property
    def remaining(self):
        return len(self.students) - self.index

    @property
    def exhausted(self):
        return self.index >= len(self.students)

    def take(self, avoid_branch=None, lookahead=5):
        """Dequeue the next student, preferring one whose branch is not ``avoid_branch``.

        The next ``lookahead`` students are searched; a match further back is
        swapped to the front before it is consumed, so the remaining order
        changes. With no match the front student is taken anyway.
        """
        if self.exhausted:
            return None

        if avoid_branch is not None:
            end = min(self.index + lookahead, len(self.students))
            for i in range(self.index, end):
                if self.students[i].branch != avoid_branch:
                    if i != self.index:
                        self.students[self.index], self.students[i] = self.students[i], self.students[self.index]
                    break

        student = self.students[self.index]
        self.index += 1
        return student

    def leftover(self):
        return self.students[self.index:]

    def __repr__(self):
        cohort = "reference" if self.is_reference else "other"
        return f"Pool(year={self.year}, {cohort}, {self.remaining}/{len(self.students)} left)"


def build_pools(students, reference_branch="CSE", rng=None):
    """Split students into one shuffled pool per (year, is_reference) pair.

    Both cohorts exist for every year present, even when one of them is empty.
    """
    rng = rng or random.Random()

    grouped = {}
    for student in students:
        key = (student.year, student.branch == reference_branch)
        grouped.setdefault(key, []).append(student)

    pools = {}
    for year in sorted({year for year, _ in grouped}):
        for is_reference in (True, False):
            members = grouped.get((year, is_reference), [])
            rng.shuffle(members)
            pools[(year, is_reference)] = Pool(year, is_reference, members)
    return pools
