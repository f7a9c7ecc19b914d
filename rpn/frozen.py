class FrozenList(list):
    """
    A list that can be read and iterated but not changed after construction
    """

    def _immutable(self, *args, **kws):
        raise TypeError("cannot change postfix tokens - they are immutable")

    pop = _immutable
    remove = _immutable
    append = _immutable
    clear = _immutable
    extend = _immutable
    insert = _immutable
    reverse = _immutable
    sort = _immutable
    __setitem__ = _immutable
    __delitem__ = _immutable
    __iadd__ = _immutable
    __imul__ = _immutable

    def __repr__(self):
        return f"FrozenList({list.__repr__(self)})"
