import base64
import binascii


def is_data_url(data: str) -> bool:
    """
    Check if the provided string is a base64 data URL
    """
    return data.startswith("data:") and ";base64," in data


def build_data_url(mime_type: str, data) -> str:
    """
    Build a data URL from raw bytes or an already base64 encoded string.
    """
    if isinstance(data, (bytes, bytearray)):
        data = base64.b64encode(bytes(data)).decode("ascii")
    return f"data:{mime_type};base64,{data}"


def remove_b64_header(data: str) -> str:
    """
    Remove the base64 header from a data URL.
    """
    if data.startswith("data:"):
        img_b64 = data.split(",", 1)[-1]
        img_b64 = "".join(img_b64.split())
        padding = len(img_b64) % 4
        if padding:
            img_b64 += "=" * (4 - padding)
        return img_b64
    return data


def split_data_url(data_url: str) -> tuple[str, bytes]:
    """
    Return the MIME type and decoded bytes of a data URL.
    """
    if not is_data_url(data_url):
        raise ValueError("Not a base64 data URL")
    header = data_url.split(",", 1)[0]
    mime_type = header[len("data:"):].split(";", 1)[0] or "application/octet-stream"
    try:
        payload = base64.b64decode(remove_b64_header(data_url), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return mime_type, payload
