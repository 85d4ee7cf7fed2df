import logging
import requests


logger = logging.getLogger(__name__)


DEFAULT_HEADERS = {"Accept": "application/json"}


def make_request(
    url,
    method,
    params=None,
    data=None,
    json=None,
    headers=None,
    request_timeout=None,
    response_timeout=None,
):
    timeout = request_timeout or 5, response_timeout or 10
    func = getattr(requests, method)
    headers = DEFAULT_HEADERS if headers is None else headers
    try:
        response = func(
            url,
            params=params,
            headers=headers,
            data=data,
            json=json,
            timeout=timeout,
        )
        response.raise_for_status()
        return response
    except requests.HTTPError as e:
        logger.error(e)
    except requests.RequestException as e:
        logger.critical(e)
