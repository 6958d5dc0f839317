import logging
import time
from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, Optional, Sequence, Type, TypeVar, Union
from urllib.parse import quote

import httpx
from azure.core.credentials import AccessToken
from azure.identity import DefaultAzureCredential
from pydantic import BaseModel, ValidationError

from ..api_models import (
    ARMErrorModel,
    AsyncOperationModel,
    ElasticPoolModel,
    ElasticPoolResourceModel,
    ElasticPoolSpec,
    ServerModel,
)
from ..configuration import config_get
from ..exceptions import (
    InvalidResponseError,
    OperationFailedError,
    ResourceNotFoundError,
    SqlPoolAPIError,
    SqlPoolConfigurationError,
)

MANAGEMENT_URL = "https://management.azure.com"
MANAGEMENT_SCOPE = "https://management.azure.com/.default"
DEFAULT_API_VERSION = "2021-11-01"
DEFAULT_POLL_INTERVAL = 5
# refresh acquired access tokens this many seconds before they expire
TOKEN_REFRESH_MARGIN = 300

OPERATION_SUCCEEDED = "Succeeded"
TERMINAL_OPERATION_STATUSES = (OPERATION_SUCCEEDED, "Failed", "Canceled")

log = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class _MethodEnum(str, Enum):
    get = "get"
    put = "put"


class BearerTokenAuth(httpx.Auth):
    def __init__(self, token: str):
        self.token = token

    def auth_flow(self, request: httpx.Request):
        request.headers["Authorization"] = f"Bearer {self.token}"
        yield request


class SqlManagementClient:
    """Access Azure SQL elastic pools through the Azure Resource Manager API.

    Unless they're passed in, the endpoint URL, subscription, API version and
    access token are taken from the `client` section of the configuration.
    Without a configured token, one is obtained through azure-identity's
    DefaultAzureCredential, i.e. from the environment, a managed identity or
    the Azure CLI.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        subscription_id: Optional[str] = None,
        access_token: Optional[str] = None,
        api_version: Optional[str] = None,
    ):
        self._acquired_token: Optional[AccessToken] = None
        if url:
            self.url = url
        if subscription_id:
            self.subscription_id = subscription_id
        if access_token:
            self.access_token = access_token
        if api_version:
            self.api_version = api_version

    @property
    def url(self) -> str:
        return getattr(self, "_url", None) or str(config_get("client.url", default=MANAGEMENT_URL))

    @url.setter
    def url(self, value: str):
        self._url = value

    @property
    def subscription_id(self) -> str:
        subscription_id = getattr(self, "_subscription_id", None) or config_get(
            "client.subscription-id"
        )
        if not subscription_id:
            raise SqlPoolConfigurationError(
                "No subscription id configured (client.subscription-id)"
            )
        return subscription_id

    @subscription_id.setter
    def subscription_id(self, value: str):
        self._subscription_id = value

    @property
    def access_token(self) -> str:
        token = getattr(self, "_access_token", None) or config_get("client.auth.token")
        if token:
            return token

        acquired = self._acquired_token
        if not acquired or acquired.expires_on - TOKEN_REFRESH_MARGIN <= time.time():
            log.debug("Acquiring access token through DefaultAzureCredential")
            credential = DefaultAzureCredential()
            try:
                acquired = self._acquired_token = credential.get_token(MANAGEMENT_SCOPE)
            finally:
                credential.close()

        return acquired.token

    @access_token.setter
    def access_token(self, value: str):
        self._access_token = value

    @property
    def api_version(self) -> str:
        return getattr(self, "_api_version", None) or config_get(
            "client.api-version", default=DEFAULT_API_VERSION
        )

    @api_version.setter
    def api_version(self, value: str):
        self._api_version = value

    @property
    def timeout(self) -> Optional[float]:
        return config_get("client.timeout")

    @property
    def poll_interval(self) -> float:
        return config_get("client.poll-interval", default=DEFAULT_POLL_INTERVAL)

    def client(self) -> httpx.Client:
        return httpx.Client(
            auth=BearerTokenAuth(self.access_token), base_url=self.url, timeout=self.timeout
        )

    # URL paths

    def _server_path(self, resource_group_name: str, server_name: str) -> str:
        return (
            f"/subscriptions/{quote(self.subscription_id, safe='')}"
            + f"/resourceGroups/{quote(resource_group_name, safe='')}"
            + f"/providers/Microsoft.Sql/servers/{quote(server_name, safe='')}"
        )

    def _elastic_pool_path(
        self, resource_group_name: str, server_name: str, elastic_pool_name: str
    ) -> str:
        return (
            self._server_path(resource_group_name, server_name)
            + f"/elasticPools/{quote(elastic_pool_name, safe='')}"
        )

    # Low level request handling

    @staticmethod
    def _api_error(response: httpx.Response) -> SqlPoolAPIError:
        exc_cls = (
            ResourceNotFoundError
            if response.status_code == HTTPStatus.NOT_FOUND
            else SqlPoolAPIError
        )
        try:
            error = ARMErrorModel.model_validate(response.json()).error
        except (ValueError, ValidationError):
            return exc_cls(
                response.status_code,
                None,
                f"{response.status_code} {response.reason_phrase}: {response.text}".strip(),
            )
        return exc_cls(response.status_code, error.code, error.message)

    @staticmethod
    def _parse_response(response: httpx.Response, model_cls: Type[ModelT]) -> ModelT:
        """Validate the JSON body of a successful response against a model.

        :raises InvalidResponseError: if the body isn't JSON or doesn't fit
        """
        try:
            return model_cls.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            log.debug("Can't parse %s response: %s", model_cls.__name__, response.text)
            raise InvalidResponseError(
                response.status_code,
                None,
                f"Unexpected {response.status_code} response, not a valid"
                f" {model_cls.__name__}: {exc}",
            ) from exc

    def _query_method(
        self,
        method: _MethodEnum,
        url: str,
        *,
        in_json: Optional[Dict[str, Any]] = None,
        with_api_version: bool = True,
        expected_status: Union[HTTPStatus, Sequence[HTTPStatus]] = HTTPStatus.OK,
    ) -> httpx.Response:
        add_kwargs = {}
        if in_json is not None:
            add_kwargs["json"] = in_json
        if with_api_version:
            add_kwargs["params"] = {"api-version": self.api_version}

        log.debug("%s %s", method.name.upper(), url)

        with self.client() as client:
            client_method = getattr(client, method.name)
            response = client_method(url=url, **add_kwargs)

        log.debug("%s %s -> %s", method.name.upper(), url, response.status_code)

        if isinstance(expected_status, HTTPStatus):
            expected_status = (expected_status,)

        if response.status_code not in expected_status:
            raise self._api_error(response)

        return response

    # Long-running operations

    def _sleep_before_poll(self, response: httpx.Response):
        delay = self.poll_interval
        retry_after = response.headers.get("Retry-After", "")
        # only delay-seconds, not HTTP dates
        if retry_after.isdigit():
            delay = int(retry_after)
        log.debug("Waiting %s seconds for the operation to progress", delay)
        time.sleep(delay)

    def _poll_async_operation(self, url: str, response: httpx.Response):
        while True:
            self._sleep_before_poll(response)
            response = self._query_method(_MethodEnum.get, url, with_api_version=False)
            operation = self._parse_response(response, AsyncOperationModel)
            log.debug("Operation status: %s", operation.status)
            if operation.status in TERMINAL_OPERATION_STATUSES:
                break

        if operation.status != OPERATION_SUCCEEDED:
            if operation.error:
                raise OperationFailedError(
                    response.status_code, operation.error.code, operation.error.message
                )
            raise OperationFailedError(
                response.status_code, None, f"Operation finished with status {operation.status}"
            )

    def _poll_location(self, url: str, response: httpx.Response):
        while True:
            self._sleep_before_poll(response)
            response = self._query_method(
                _MethodEnum.get,
                url,
                with_api_version=False,
                expected_status=(
                    HTTPStatus.OK,
                    HTTPStatus.CREATED,
                    HTTPStatus.ACCEPTED,
                    HTTPStatus.NO_CONTENT,
                ),
            )
            if response.status_code != HTTPStatus.ACCEPTED:
                break

    def _wait_for_operation(self, response: httpx.Response) -> bool:
        """Wait until a long-running operation has finished.

        Returns whether the resource has to be fetched again because the
        response didn't contain its final state.
        """
        if response.status_code == HTTPStatus.OK:
            return False

        async_operation_url = response.headers.get("Azure-AsyncOperation")
        location_url = response.headers.get("Location")

        if async_operation_url:
            self._poll_async_operation(async_operation_url, response)
        elif location_url:
            self._poll_location(location_url, response)

        return True

    # API methods

    def get_server(self, resource_group_name: str, server_name: str) -> ServerModel:
        response = self._query_method(
            _MethodEnum.get, self._server_path(resource_group_name, server_name)
        )
        return self._parse_response(response, ServerModel)

    def get_server_location(self, resource_group_name: str, server_name: str) -> str:
        return self.get_server(resource_group_name, server_name).location

    def get_elastic_pool(
        self, resource_group_name: str, server_name: str, elastic_pool_name: str
    ) -> ElasticPoolModel:
        response = self._query_method(
            _MethodEnum.get,
            self._elastic_pool_path(resource_group_name, server_name, elastic_pool_name),
        )
        return ElasticPoolModel.from_resource(
            self._parse_response(response, ElasticPoolResourceModel),
            resource_group_name=resource_group_name,
            server_name=server_name,
            elastic_pool_name=elastic_pool_name,
        )

    def elastic_pool_exists(
        self, resource_group_name: str, server_name: str, elastic_pool_name: str
    ) -> bool:
        """Check if an elastic pool exists, without looking at its content."""
        try:
            self._query_method(
                _MethodEnum.get,
                self._elastic_pool_path(resource_group_name, server_name, elastic_pool_name),
            )
        except ResourceNotFoundError:
            return False
        return True

    def upsert_elastic_pool(self, spec: ElasticPoolSpec) -> ElasticPoolModel:
        """Create or update an elastic pool and return its resulting state."""
        url = self._elastic_pool_path(
            spec.resource_group_name, spec.server_name, spec.elastic_pool_name
        )
        response = self._query_method(
            _MethodEnum.put,
            url,
            in_json=spec.request_body(),
            expected_status=(HTTPStatus.OK, HTTPStatus.CREATED, HTTPStatus.ACCEPTED),
        )

        if self._wait_for_operation(response):
            return self.get_elastic_pool(
                spec.resource_group_name, spec.server_name, spec.elastic_pool_name
            )

        return ElasticPoolModel.from_resource(
            self._parse_response(response, ElasticPoolResourceModel),
            resource_group_name=spec.resource_group_name,
            server_name=spec.server_name,
            elastic_pool_name=spec.elastic_pool_name,
        )
