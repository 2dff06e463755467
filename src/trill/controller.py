"""Controller — the host that borrows actions from delegates.

Declare delegates on the class; they are loaded on the first dispatch
of an action the controller does not define itself::

    class IndexController(Controller):
        delegates = ("Crud", "Map")

        def about_action(self) -> None:
            self.view.title = "About"

    controller = IndexController(config=TrillConfig(template_dirs=("views",)))
    controller.dispatch("map")      # runs Map.map_action
    controller.body                 # rendered HTML

``delegates`` accepts the same shapes as ``DelegationManager``: names,
delegate classes or instances, ``(identifier, spec)`` pairs, or a
mapping ``{identifier: {"only": [...], "except": [...]}}``.
"""

from typing import Any, ClassVar

from trill.config import TrillConfig
from trill.loader import DelegateLoader
from trill.manager import DelegationManager
from trill.naming import is_action_name, module_name_for, normalize_action
from trill.view import View


class Controller:
    """Base controller with lazily built delegation."""

    delegates: ClassVar[Any] = ()
    controller_name: ClassVar[str] = ""
    """Name used for ``<controller>/<action>`` templates. Derived from the class name if empty."""

    _native_actions: ClassVar[dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        table: dict[str, str] = {}
        for klass in reversed(cls.__mro__):
            if klass in (object, Controller):
                continue
            for attr, value in vars(klass).items():
                if is_action_name(attr) and callable(value):
                    table[normalize_action(attr)] = attr
        cls._native_actions = table

    def __init__(
        self,
        *,
        config: TrillConfig | None = None,
        view: View | None = None,
        params: dict[str, Any] | None = None,
        loader: DelegateLoader | None = None,
    ) -> None:
        self.config = config or TrillConfig()
        self.view = view if view is not None else View(controller=self.name, config=self.config)
        self.params: dict[str, Any] = dict(params or {})
        self._loader = loader
        self._delegate_manager: DelegationManager | None = None
        self.setup()

    def setup(self) -> None:
        """Hook run at the end of ``__init__``."""

    @property
    def name(self) -> str:
        if self.controller_name:
            return self.controller_name
        return module_name_for(type(self).__name__).removesuffix("_controller")

    @property
    def delegate_manager(self) -> DelegationManager:
        """The controller's delegation manager, built on first use."""
        if self._delegate_manager is None:
            self._delegate_manager = DelegationManager(self, self.delegates, self._loader)
        return self._delegate_manager

    def has_action(self, action: str) -> bool:
        normalized = normalize_action(action)
        return normalized in self._native_actions or self.delegate_manager.has_action(normalized)

    def dispatch(self, action: str, *args: Any, render: bool = True) -> Any:
        """Run *action* natively or through a delegate, then render its template.

        Actions the controller defines win; anything else goes to the
        delegation manager, which raises ``ActionNotFound`` when no
        delegate owns it. With *render*, the conventional
        ``<controller>/<action>`` template is rendered afterwards unless
        something was already rendered or no such template exists.
        """
        normalized = normalize_action(action)
        method_name = self._native_actions.get(normalized)
        if method_name is not None:
            result = getattr(self, method_name)(*args)
        else:
            result = self.delegate_manager.run(normalized, args)

        if render:
            self.post_dispatch(normalized)
        return result

    def post_dispatch(self, action: str) -> None:
        if self.view.rendered:
            return
        if self.view.resolve_absolute(self.view.script_path_for(action)) is not None:
            self.view.render(action)

    @property
    def body(self) -> str:
        """Everything rendered so far, concatenated."""
        return "".join(self.view.output)
