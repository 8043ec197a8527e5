"""Tests for the Camera client against the simulated camera."""

import asyncio

import pytest
import pytest_asyncio

from ambercam import Camera, CameraState
from ambercam.exceptions import (
    ConnectionClosedError,
    ConnectionError,
    InvalidOptionError,
    ParseError,
    TimeoutError,
)
from ambercam.protocol.constants import Command
from ambercam.protocol.options import UnknownMode
from ambercam.protocol.packet import encode_packet
from ambercam.transport.tcp import AsyncTCPTransport

from conftest import build_response, serve_mock_camera


class TestCameraConnection:
    """Tests for connection state handling."""

    @pytest.fixture
    def camera(self, mock_transport):
        """Create a Camera over a bare MockTransport."""
        return Camera(mock_transport, response_timeout=0.05)

    def test_initial_state(self, camera):
        """Test camera starts disconnected."""
        assert camera.state == CameraState.DISCONNECTED
        assert camera.is_connected is False
        assert camera.response_timeout == 0.05

    @pytest.mark.asyncio
    async def test_connect_and_close(self, camera, mock_transport):
        """Test connect opens the transport and close shuts it."""
        await camera.connect()
        assert camera.state == CameraState.CONNECTED
        assert mock_transport.is_open

        await camera.close()
        assert camera.state == CameraState.DISCONNECTED
        assert not mock_transport.is_open

    @pytest.mark.asyncio
    async def test_connect_twice_is_noop(self, camera):
        """Test connecting an already connected camera."""
        await camera.connect()
        await camera.connect()
        assert camera.is_connected

    @pytest.mark.asyncio
    async def test_close_when_not_connected(self, camera):
        """Test close is safe before connect."""
        await camera.close()
        assert camera.state == CameraState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_send_when_not_connected_raises(self, camera, mock_transport):
        """Test commands require a connection."""
        with pytest.raises(ConnectionError) as exc_info:
            await camera.invert_image()
        assert "DISCONNECTED" in str(exc_info.value)
        assert mock_transport.written_data == []

    @pytest.mark.asyncio
    async def test_timeout(self, camera, mock_transport):
        """Test a silent camera produces TimeoutError."""
        await camera.connect()
        with pytest.raises(TimeoutError):
            await camera.toggle_freeze_frame()

    @pytest.mark.asyncio
    async def test_close_rejects_pending(self, camera, mock_transport):
        """Test close fails requests still waiting for a response."""
        camera.response_timeout = 5.0
        await camera.connect()

        task = asyncio.create_task(camera.get_nuc())
        while not mock_transport.written_data:
            await asyncio.sleep(0)

        await camera.close()

        with pytest.raises(ConnectionClosedError):
            await task

    @pytest.mark.asyncio
    async def test_connection_lost_rejects_pending(self, camera, mock_transport):
        """Test a dropped connection fails pending requests."""
        camera.response_timeout = 5.0
        await camera.connect()

        task = asyncio.create_task(camera.get_lut())
        while not mock_transport.written_data:
            await asyncio.sleep(0)

        mock_transport.drop_connection(OSError("reset by peer"))

        with pytest.raises(ConnectionClosedError) as exc_info:
            await task
        assert isinstance(exc_info.value.__cause__, OSError)
        assert camera.state == CameraState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_short_mode_payload_raises(self, camera, mock_transport):
        """Test a getter response without a value word."""
        mock_transport.set_response_callback(lambda data: build_response(5, 5, data[5]))
        await camera.connect()
        with pytest.raises(ParseError):
            await camera.get_itt()

    @pytest.mark.asyncio
    async def test_context_manager(self, mock_transport):
        """Test async context manager protocol."""
        async with Camera(mock_transport) as camera:
            assert camera.is_connected
        assert camera.state == CameraState.DISCONNECTED
        assert not mock_transport.is_open

    def test_repr(self, camera):
        """Test string representation."""
        assert repr(camera) == "Camera(state=DISCONNECTED, transport=mock://test)"


class TestCameraCommands:
    """Tests for camera operations against the simulated camera."""

    @pytest_asyncio.fixture
    async def camera(self, camera_transport):
        """Create a connected Camera answered by the simulated camera."""
        camera = Camera(camera_transport, response_timeout=0.5)
        await camera.connect()
        yield camera
        await camera.close()

    @pytest.mark.asyncio
    async def test_set_brightness(self, camera, mock_camera):
        """Test brightness steps up and down by one."""
        await camera.set_brightness(-1)
        assert mock_camera.brightness == 99
        await camera.set_brightness(1)
        assert mock_camera.brightness == 100

    @pytest.mark.asyncio
    async def test_set_brightness_zero_steps_down(self, camera, mock_camera):
        """Test a zero delta counts as down."""
        await camera.set_brightness(0)
        assert mock_camera.brightness == 99

    @pytest.mark.asyncio
    async def test_set_contrast(self, camera, mock_camera):
        """Test contrast steps up and down by one."""
        await camera.set_contrast(-1)
        assert mock_camera.contrast == 99
        await camera.set_contrast(1)
        assert mock_camera.contrast == 100

    @pytest.mark.asyncio
    async def test_invert_image(self, camera, mock_camera):
        """Test image inversion toggles."""
        await camera.invert_image()
        assert mock_camera.image_inverted is True
        await camera.invert_image()
        assert mock_camera.image_inverted is False

    @pytest.mark.asyncio
    async def test_freeze_frame(self, camera, mock_camera):
        """Test freeze frame toggles."""
        await camera.toggle_freeze_frame()
        assert mock_camera.frozen is True

    @pytest.mark.asyncio
    async def test_cooler(self, camera, mock_camera):
        """Test switching the cooler."""
        await camera.set_cooler(False)
        assert mock_camera.cooler is False
        await camera.set_cooler(True)
        assert mock_camera.cooler is True

    @pytest.mark.asyncio
    async def test_color_bar(self, camera, mock_camera):
        """Test showing and hiding the color bar."""
        await camera.toggle_color_bar(True)
        assert mock_camera.color_bar is True
        await camera.toggle_color_bar(False)
        assert mock_camera.color_bar is False

    @pytest.mark.asyncio
    async def test_osd(self, camera, mock_camera):
        """Test showing and hiding the on-screen display."""
        await camera.toggle_osd(False)
        assert mock_camera.osd is False
        await camera.toggle_osd(True)
        assert mock_camera.osd is True

    @pytest.mark.asyncio
    async def test_1_point_calibration(self, camera, mock_camera):
        """Test calibration reads the NUC table and passes its value."""
        mock_camera.nuc = 3
        await camera.run_1_point_calibration()
        assert mock_camera.running_1pt_calibration is True
        assert mock_camera.calibration_args == (3, 0)
        assert [r[:2] for r in mock_camera.requests] == [(7, 6), (7, 1)]

    @pytest.mark.asyncio
    async def test_2_point_calibration(self, camera, mock_camera):
        """Test two-point calibration."""
        await camera.run_2_point_calibration()
        assert mock_camera.running_2pt_calibration is True
        assert mock_camera.calibration_args == (1, 0)

    @pytest.mark.asyncio
    async def test_agc(self, camera, mock_camera):
        """Test AGC defaults to off and reports on after a mode is set."""
        assert await camera.get_agc() is False

        await camera.set_agc("full")
        assert mock_camera.agc == 0
        assert await camera.get_agc() is True

        await camera.set_agc("off")
        assert mock_camera.agc is False
        assert await camera.get_agc() is False

    @pytest.mark.asyncio
    async def test_set_agc_mode_sends_enable_then_set(self, camera, mock_camera):
        """Test a non-off mode enables AGC before selecting the mode."""
        await camera.set_agc("horizon")
        assert [r[:2] for r in mock_camera.requests] == [(1, 1), (1, 3)]
        assert mock_camera.requests[1][3] == bytes([3, 0])

    @pytest.mark.asyncio
    async def test_itt(self, camera, mock_camera):
        """Test setting and reading the ITT mode."""
        assert await camera.get_itt() == "linear"
        await camera.set_itt("s-curve")
        assert mock_camera.itt == 3
        assert await camera.get_itt() == "s-curve"

    @pytest.mark.asyncio
    async def test_lut(self, camera, mock_camera):
        """Test setting and reading the LUT mode."""
        assert await camera.get_lut() == "black-and-white"
        await camera.set_lut("color")
        assert mock_camera.lut == 2
        assert await camera.get_lut() == "color"

    @pytest.mark.asyncio
    async def test_nuc(self, camera, mock_camera, camera_transport):
        """Test setting and reading the NUC mode."""
        assert await camera.get_nuc() == "cold"
        await camera.set_nuc("hot")
        assert mock_camera.nuc == 4
        camera_transport.assert_written(encode_packet(2, 7, 5, 4))
        assert await camera.get_nuc() == "hot"

    @pytest.mark.asyncio
    async def test_unknown_mode(self, camera, mock_camera):
        """Test an unmapped wire value decodes to UnknownMode."""
        mock_camera.nuc = 9
        assert await camera.get_nuc() == UnknownMode(value=9, option_map="NUC")

    @pytest.mark.asyncio
    async def test_get_status(self, camera):
        """Test decoding the status counters."""
        status = await camera.get_status()
        assert status.num_cooler_cycles == 22246
        assert status.num_power_cycles == 22371
        assert status.cooler_time == 1431779362

    @pytest.mark.asyncio
    async def test_send_command(self, camera, mock_camera):
        """Test sending a table command directly."""
        assert await camera.send(Command.NUC_GET) == bytes([1, 0])

    @pytest.mark.asyncio
    async def test_sequence_numbers_increment(self, camera, camera_transport):
        """Test every request carries the next sequence number."""
        for _ in range(3):
            await camera.invert_image()
        assert [p[5] for p in camera_transport.written_data] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_broken_camera_times_out(self, camera, mock_camera):
        """Test a camera that stops answering."""
        mock_camera.broken = True
        camera.response_timeout = 0.05
        with pytest.raises(TimeoutError):
            await camera.invert_image()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "setter,option,names",
        [
            ("set_agc", "fake", '"off", "full", "midsize", "center", "horizon"'),
            ("set_itt", "fake", '"linear", "inverse", "s-curve", "two-cycle"'),
            ("set_nuc", "fake", '"cold", "mid", "warm", "hot"'),
            ("set_lut", "fake", '"black-and-white", "color", "sepia"'),
        ],
    )
    async def test_invalid_option(self, camera, camera_transport, setter, option, names):
        """Test invalid modes raise before anything is written."""
        with pytest.raises(InvalidOptionError) as exc_info:
            await getattr(camera, setter)(option)
        assert str(exc_info.value) == f'Option "fake" is invalid. Available options are [{names}]'
        assert camera_transport.written_data == []


class TestCameraOverTcp:
    """End-to-end tests over a local TCP socket."""

    @pytest.mark.asyncio
    async def test_round_trip(self, mock_camera):
        """Test commands and getters over a real socket."""
        async with serve_mock_camera(mock_camera) as port:
            async with Camera(AsyncTCPTransport("127.0.0.1", port)) as camera:
                await camera.set_nuc("hot")
                assert await camera.get_nuc() == "hot"
                await camera.set_itt("two-cycle")
                assert await camera.get_itt() == "two-cycle"
                status = await camera.get_status()
                assert status.cooler_time == 1431779362

        assert mock_camera.nuc == 4
        assert mock_camera.itt == 4

    @pytest.mark.asyncio
    async def test_concurrent_requests(self, mock_camera):
        """Test concurrent requests over one connection all resolve."""
        async with serve_mock_camera(mock_camera) as port:
            async with Camera(AsyncTCPTransport("127.0.0.1", port)) as camera:
                results = await asyncio.gather(
                    camera.get_nuc(),
                    camera.get_lut(),
                    camera.get_itt(),
                    camera.get_agc(),
                )

        assert results == ["cold", "black-and-white", "linear", False]
