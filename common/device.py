"""Serial device setup for serial-transfer.

Contains:
- log_device_info: Log information about a serial device
- open_serial: Open and configure a non-blocking serial port
"""

import logging
import os

import serial
import serial.tools.list_ports

logger = logging.getLogger(__name__)

DEFAULT_BAUDRATE = 115200
WRITE_TIMEOUT_S = 1.0


def log_device_info(device: str) -> None:
    """Log information about a serial device."""
    if "://" in device:
        logger.info(f"Device: {device} (url)")
        return

    real_path = os.path.realpath(device)
    if real_path.startswith("/dev/pts/"):
        logger.info(f"Device: {device} -> {real_path} (pty)")
        return

    ports = [p for p in serial.tools.list_ports.comports() if p.device == device]
    if len(ports) == 0:
        logger.info(f"Device: {device} (not in port list)")
        return
    if len(ports) > 1:
        raise RuntimeError(f"Multiple ports found for device {device}")

    info = ports[0]
    logger.info(f"Device: {info.device}")
    logger.info(f"Description: {info.description}")
    if info.vid is not None:
        logger.info(f"VID:PID: {info.vid:04x}:{info.pid:04x}")


def open_serial(
    device: str,
    baudrate: int = DEFAULT_BAUDRATE,
    rtscts: bool = False,
) -> serial.Serial:
    """Open and configure a serial port for use as a transfer link.

    ``device`` may be a path or a pyserial URL such as ``loop://``. Reads
    never block (``timeout=0``), matching the polling model of
    ``SerialTransfer.poll``.
    """
    log_device_info(device)
    ser = serial.serial_for_url(
        device,
        baudrate=baudrate,
        bytesize=serial.EIGHTBITS,
        parity=serial.PARITY_NONE,
        stopbits=serial.STOPBITS_ONE,
        xonxoff=False,
        rtscts=rtscts,
        timeout=0,
        write_timeout=WRITE_TIMEOUT_S,
    )
    ser.reset_input_buffer()
    ser.reset_output_buffer()
    logger.debug(f"Serial port: baudrate={ser.baudrate}, rtscts={ser.rtscts}")
    return ser
