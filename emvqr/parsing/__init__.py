"""
This package contains the payload codecs.

Sub-packages handle specific data formats:

- ``tlv``: EMV QR tag-length-value payload encoding and decoding.
"""
