"""Represent a student enrolled (or enrollable) in a course."""

import typing


class Student:
    """Represents a student.

    Attributes
    ----------
    student_id : str
        The student's number (identification string).
    first_name : Optional[str]
        The student's first name, if known.
    last_name : Optional[str]
        The student's last name, if known.
    middle_initial : Optional[str]
        The student's middle initial, if known.
    rfid : Optional[str]
        The RFID card registered to the student. Students without a card
        cannot be added to a course roster.

    When a :class:`Student` instance is printed, the student's name is
    displayed if available; however, when two :class:`Student` instances are
    compared for equality, the :code:`.student_id` attribute is used. A
    :class:`Student` also compares equal to a plain string holding its id, so
    that it can be used directly in the index of a score table:

    .. code::

        store.points.loc['2021-0001', 'quiz-1']

    """

    def __init__(
        self,
        student_id,
        first_name=None,
        last_name=None,
        middle_initial=None,
        rfid=None,
    ):
        self.student_id = student_id
        self.first_name = first_name
        self.last_name = last_name
        self.middle_initial = middle_initial
        self.rfid = rfid

    @property
    def name(self) -> typing.Optional[str]:
        """The name in "Last, First M." form, or `None` if unknown."""
        if self.last_name is None and self.first_name is None:
            return None

        name = f"{self.last_name or ''}, {self.first_name or ''}".strip(", ")
        if self.middle_initial:
            name += f" {self.middle_initial}."
        return name

    @property
    def has_rfid(self) -> bool:
        return self.rfid is not None and str(self.rfid).strip() != ""

    def __repr__(self):
        """String representation uses name, if available; id otherwise."""
        s = self.name if self.name is not None else self.student_id
        return f"<{s}>"

    def __hash__(self):
        return hash(self.student_id)

    def __eq__(self, other):
        """Equality checks always use the student id."""
        if isinstance(other, Student):
            return other.student_id == self.student_id
        else:
            return self.student_id == other

    def __lt__(self, other):
        if isinstance(other, Student):
            return self.student_id < other.student_id
        else:
            return self.student_id < other


class Students(typing.Sequence[Student]):
    """A sequence of :class:`Student` instances.

    This behaves like a list of :class:`Student` instances, but also provides
    :meth:`find` to look up a student by (part of) their name, and
    :meth:`by_id` to look one up by student number.

    """

    def __init__(self, students: typing.Iterable[Student]):
        self._students = list(students)

    def __getitem__(self, ix):
        return self._students[ix]

    def __len__(self):
        return len(self._students)

    def __repr__(self):
        return f"Students({self._students!r})"

    @property
    def ids(self) -> set:
        """The set of student ids."""
        return {s.student_id for s in self._students}

    def by_id(self, student_id: str) -> typing.Optional[Student]:
        """Return the student with the given id, or `None` if there is none.

        The signature makes this usable as the ``student_lookup`` of
        :func:`classrecord.roster.reconcile`.

        """
        for student in self._students:
            if student.student_id == student_id:
                return student
        return None

    def sorted_by_name(self) -> "Students":
        """Students ordered by last name, then first name."""
        return self.__class__(
            sorted(
                self._students,
                key=lambda s: ((s.last_name or "").lower(), (s.first_name or "").lower()),
            )
        )

    def find(self, pattern: str) -> Student:
        """Finds a student from a substring of their name.

        The search is case-insensitive.

        Parameters
        ----------
        pattern : str
            A pattern to search for in the student's name. All students whose
            (lowercased) names contain this pattern as a substring will be
            considered matches.

        Returns
        -------
        Student
            The matching student.

        Raises
        ------
        ValueError
            If no student matches, or if more than one student matches.

        """

        def is_match(student):
            if student.name is None:
                return False
            return pattern.lower() in student.name.lower()

        matches = [s for s in self._students if is_match(s)]

        if len(matches) == 0:
            raise ValueError(f"No names matched {pattern}.")

        if len(matches) > 1:
            raise ValueError(f'More than one name matched "{pattern}": {matches}')

        return matches[0]
