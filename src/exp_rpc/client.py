"""Client: wires a provider, a config and the exp namespace together.

Usage::

    client = Client(HttpProvider("http://localhost:8545"))
    coinbase = client.exp.coinbase
    balance = client.exp.get_balance(coinbase, None)
"""

from __future__ import annotations

from .binding.namespace import Namespace, assemble_namespace
from .binding.request_manager import RequestManager
from .config import ClientConfig
from .protocol import exp
from .transport.base import Provider


class ExpNamespace(Namespace):
    """The ``exp`` namespace plus its locally held defaults."""

    def __init__(self, name: str, config: ClientConfig) -> None:
        super().__init__(name)
        object.__setattr__(self, "_config", config)

    @property
    def default_block(self) -> str | int:
        """Block used when a default-block argument is ``None``. No request."""
        return self._config.default_block

    @default_block.setter
    def default_block(self, block: str | int) -> None:
        self._config.default_block = block

    @property
    def default_account(self) -> str | None:
        return self._config.default_account

    @default_account.setter
    def default_account(self, account: str | None) -> None:
        self._config.default_account = account


class Client:
    """Self-contained client; nothing is shared between instances."""

    def __init__(
        self,
        provider: Provider | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._manager = RequestManager(provider)
        self.exp = assemble_namespace(
            exp.NAMESPACE,
            exp.METHODS,
            exp.PROPERTIES,
            self._manager,
            self.config,
            namespace_cls=ExpNamespace,
            namespace_kwargs={"config": self.config},
        )

    @property
    def current_provider(self) -> Provider | None:
        return self._manager.provider

    def set_provider(self, provider: Provider | None) -> None:
        self._manager.set_provider(provider)

    def reset(self) -> None:
        """Restore the default block and default account."""
        defaults = ClientConfig()
        self.config.default_block = defaults.default_block
        self.config.default_account = defaults.default_account
