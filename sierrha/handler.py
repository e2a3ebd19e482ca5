# File: sierrha/handler.py
"""sierrha.handler: Обработчик ошибки одного HTTP-статуса — разрешение ссылки, загрузка страницы и запасной вывод."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

from sierrha.cache import CacheManager
from sierrha.config import HandlerConfig, SierrhaConfig, load_extension_config
from sierrha.exceptions import ImmediateAbort
from sierrha.fetcher import CacheAsideFetcher
from sierrha.links import parse_link
from sierrha.logger import logger
from sierrha.models import ErrorResponse, RequestContext, ResolvedUrl
from sierrha.netmask import match_ip
from sierrha.renderer import ErrorPageRenderer
from sierrha.resolver import UrlResolver
from sierrha.sites import SiteDirectory
from sierrha.transport import AiohttpTransport, Transport
from sierrha.translation import LabelCatalog

__all__ = ["LABEL_PREFIXES", "label_prefix_for", "ErrorHandler", "build_handler", "create_handler"]

LABEL_PREFIXES: Dict[int, str] = {
    401: "unauthorized",
    403: "forbidden",
    404: "pageNotFound",
}

GENERIC_TITLE = "Page Not Found"


def label_prefix_for(status_code: int) -> str:
    """Префикс ключей надписей для кода ошибки; 5xx → serverError, прочие → ''."""
    if status_code in LABEL_PREFIXES:
        return LABEL_PREFIXES[status_code]
    if 500 <= status_code <= 599:
        return "serverError"
    return ""


def _qualified_name(error: BaseException) -> str:
    cls = type(error)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


class ErrorHandler:
    """Отдаёт настроенную страницу ошибки для одного HTTP-статуса."""

    def __init__(
        self,
        status_code: int,
        handler_config: HandlerConfig,
        *,
        resolver: UrlResolver,
        fetcher: CacheAsideFetcher,
        catalog: LabelCatalog,
        renderer: ErrorPageRenderer,
        extension_config: Optional[SierrhaConfig] = None,
    ) -> None:
        self.status_code = status_code
        self.handler_config = handler_config
        self.resolver = resolver
        self.fetcher = fetcher
        self.catalog = catalog
        self.renderer = renderer
        self.extension_config = extension_config or SierrhaConfig()

    @property
    def label_prefix(self) -> str:
        if self.handler_config.label_prefix is not None:
            return self.handler_config.label_prefix
        return label_prefix_for(self.status_code)

    def resolve(self, context: RequestContext) -> ResolvedUrl:
        """Разрешает ссылку из конфигурации в URL для контекста запроса."""
        reference = parse_link(self.handler_config.error_page)
        return self.resolver.resolve(reference, context)

    def handle_page_error(
        self,
        context: RequestContext,
        message: str = "",
        reasons: Optional[Dict[str, Any]] = None,
    ) -> ErrorResponse:
        """
        Возвращает ответ со страницей ошибки.

        Внутренние сбои уходят в handle_internal_failure, который может
        прервать обработку через ImmediateAbort.
        """
        logger.info("Handling %d: %s %s", self.status_code, message, reasons or {})
        try:
            resolved = self.resolve(context)
            translator = self.catalog.for_language(resolved.language)
            result = self.fetcher.fetch_content(
                resolved.url,
                resolved.page_id,
                translator=translator,
                label_prefix=self.label_prefix,
                locale=context.locale,
            )
            body = result.content
        except Exception as exc:
            logger.error("Error page for status %d failed: %s", self.status_code, exc)
            body = self.handle_internal_failure(
                "Error page could not be resolved",
                exc,
                remote_addr=context.remote_addr,
                locale=context.locale,
            )
        return ErrorResponse(status_code=self.status_code, body=body)

    def is_developer_request(self, remote_addr: str) -> bool:
        return self.extension_config.debug_mode or match_ip(
            remote_addr, self.extension_config.dev_ip_mask
        )

    def handle_internal_failure(
        self,
        message: str,
        error: BaseException,
        remote_addr: str = "",
        locale: str = "en",
    ) -> str:
        """
        Generic page for visitors; for developers a detailed page that is
        raised as ImmediateAbort and bypasses the rest of the error pipeline.
        """
        title = GENERIC_TITLE
        if not self.is_developer_request(remote_addr):
            return self.renderer.render(title, message, "error", lang=locale)

        title += ": " + message
        details = f"{_qualified_name(error)}: {error}"
        code = getattr(error, "code", 0)
        if isinstance(code, int) and code:
            details += f" [code: {code}]"
        content = self.renderer.render(title, details, "error", lang=locale)
        raise ImmediateAbort(ErrorResponse(status_code=500, body=content))


def build_handler(
    status_code: int,
    config: SierrhaConfig,
    *,
    cache_manager: Optional[CacheManager] = None,
    transport: Optional[Transport] = None,
    catalog: Optional[LabelCatalog] = None,
    renderer: Optional[ErrorPageRenderer] = None,
    site_directory: Optional[SiteDirectory] = None,
) -> ErrorHandler:
    """Собирает ErrorHandler для *status_code* из конфигурации; недостающие зависимости создаются по умолчанию."""
    if status_code not in config.handlers:
        raise LookupError(f"No error handler configured for status {status_code}")

    cache_manager = cache_manager or CacheManager()
    if site_directory is None:
        site_directory = SiteDirectory.from_config(config.sites)
    renderer = renderer or ErrorPageRenderer()
    fetcher = CacheAsideFetcher(
        cache=cache_manager.get_cache(config.cache_identifier),
        transport=transport or AiohttpTransport(timeout=config.request_timeout),
        renderer=renderer,
        namespace=config.cache_namespace,
        lifetime=config.cache_lifetime,
    )
    return ErrorHandler(
        status_code,
        config.handlers[status_code],
        resolver=UrlResolver(site_directory),
        fetcher=fetcher,
        catalog=catalog or LabelCatalog.from_file(config.labels_file),
        renderer=renderer,
        extension_config=config,
    )


def create_handler(
    status_code: int,
    handler_config: HandlerConfig,
    extension_config_path: Union[str, Path, None] = None,
    **dependencies: Any,
) -> ErrorHandler:
    """
    Точка входа для хоста: обработчик получает свою настройку от хоста, а
    настройки расширения (debug_mode, сайты, кэш) читаются best-effort.

    Недоступная конфигурация расширения не ломает обработку ошибок:
    используются значения по умолчанию, подробный вывод выключен.
    """
    config = load_extension_config(extension_config_path)
    config = config.model_copy(
        update={"handlers": {**config.handlers, status_code: handler_config}}
    )
    return build_handler(status_code, config, **dependencies)
