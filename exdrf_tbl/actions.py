from typing import Any, Callable, List, Literal, Optional

from attrs import define, field

ActionVariant = Literal["default", "secondary", "destructive", "ghost"]


@define
class RowAction:
    """An action that can be performed on a single row.

    Attributes:
        label: The text shown to the user.
        on_click: Called with the row when the user triggers the action.
        show: Optional predicate; the action is only offered for rows where
            it returns True.
        variant: The visual style of the action.
        icon: An optional icon identifier.
    """

    label: str
    on_click: Callable[[Any], Any] = field(repr=False)
    show: Optional[Callable[[Any], bool]] = field(default=None, repr=False)
    variant: ActionVariant = field(default="default")
    icon: Optional[str] = field(default=None)

    def is_shown(self, row: Any) -> bool:
        return self.show is None or bool(self.show(row))


@define
class BulkAction:
    """An action that is performed on all the selected rows.

    Attributes:
        label: The text shown to the user.
        on_click: Called with the list of selected rows.
        variant: The visual style of the action.
        icon: An optional icon identifier.
    """

    label: str
    on_click: Callable[[List[Any]], Any] = field(repr=False)
    variant: ActionVariant = field(default="default")
    icon: Optional[str] = field(default=None)


def actions_for_row(actions: List[RowAction], row: Any) -> List[RowAction]:
    """Return the actions that are offered for a row."""
    return [a for a in actions if a.is_shown(row)]
