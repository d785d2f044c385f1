import enum


class FieldKind(str, enum.Enum):
    # Plain values, stored as given.
    scalar = 'scalar'

    # Reference to another entry, populated object while editing, bare id
    # when stored.
    relationship = 'relationship'

    # One or more references to externally stored binaries.
    file = 'file'

    # Record or list of records described by their own fields.
    nested_schema = 'nested_schema'

    # Field type that is not known, values are passed through untouched.
    unknown = 'unknown'


class EntryState(str, enum.Enum):
    draft = 'draft'
    published = 'published'
