from dymolw.driver import (
    Density,
    LabelWriterDriver,
    LabelWriterDriverTwinTurbo,
    PaperType,
    Quality,
    Resolution,
    Roll,
)
from dymolw.environment import MemoryPrintEnvironment
from dymolw.monitor import LabelWriterLanguageMonitor
from dymolw.options import PageHeader, process_page_options, process_ppd_options


def make(driver_class=LabelWriterDriver):
    env = MemoryPrintEnvironment()
    return driver_class(env), LabelWriterLanguageMonitor(env, use_sleep=False)


def test_resolution_choices():
    driver, monitor = make()
    process_ppd_options(driver, monitor, {"Resolution": "203dpi"}, None)
    assert driver.resolution == Resolution.RES_204
    process_ppd_options(driver, monitor, {"Resolution": "203X138DPI"}, None)
    assert driver.resolution == Resolution.RES_136


def test_quality_and_density_case_insensitive():
    driver, monitor = make()
    choices = {"DymoPrintQuality": "GRAPHICS", "DymoPrintDensity": "dark"}
    process_ppd_options(driver, monitor, choices, None)
    assert driver.quality == Quality.BARCODE_AND_GRAPHICS
    assert driver.density == Density.HIGH


def test_unknown_and_missing_choices_keep_defaults():
    driver, monitor = make()
    process_ppd_options(driver, monitor, {"DymoPrintDensity": "Bogus"}, None)
    assert driver.density == Density.NORMAL
    assert driver.resolution == Resolution.UNKNOWN
    assert driver.quality == Quality.TEXT


def test_model_widths():
    driver, monitor = make()
    process_ppd_options(driver, monitor, {}, "DYMO LabelWriter 4XL")
    assert driver.max_print_width == 156
    process_ppd_options(driver, monitor, {}, "dymo labelwriter 310")
    assert driver.max_print_width == 58
    process_ppd_options(driver, monitor, {}, "DYMO LabelWriter SE450")
    assert driver.max_print_width == 56


def test_other_model_keeps_width():
    driver, monitor = make()
    before = driver.max_print_width
    process_ppd_options(driver, monitor, {}, "DYMO LabelWriter 450")
    assert driver.max_print_width == before


def test_twin_turbo_roll_passed_to_monitor():
    driver, monitor = make(LabelWriterDriverTwinTurbo)
    process_ppd_options(driver, monitor, {"InputSlot": "Right"}, None)
    assert driver.roll == Roll.RIGHT
    assert monitor.roll == Roll.RIGHT
    assert monitor.roll_used is True


def test_twin_turbo_unknown_slot_is_auto():
    driver, monitor = make(LabelWriterDriverTwinTurbo)
    driver.roll = Roll.LEFT
    process_ppd_options(driver, monitor, {"InputSlot": "Auto"}, None)
    assert driver.roll == Roll.AUTO


def test_plain_driver_does_not_touch_monitor_roll():
    driver, monitor = make()
    process_ppd_options(driver, monitor, {"InputSlot": "Left"}, None)
    assert monitor.roll_used is False


def test_page_options_set_driver_and_monitor():
    driver, monitor = make()
    header = PageHeader(
        media_type=PaperType.CONTINUOUS,
        page_size=(100, 72),
        hw_resolution=(300, 300),
        cups_integer=(5,) + (0,) * 15,
    )
    process_page_options(driver, monitor, header)
    assert driver.paper_type == PaperType.CONTINUOUS
    assert monitor.paper_type == PaperType.CONTINUOUS
    assert driver.page_height == 300
    assert driver.page_offset == (5, 0)


def test_invalid_media_type_falls_back_to_regular():
    driver, monitor = make()
    driver.paper_type = PaperType.CONTINUOUS
    process_page_options(driver, monitor, PageHeader(media_type=7))
    assert driver.paper_type == PaperType.REGULAR


def test_twin_turbo_page_options_leave_monitor_paper_type():
    driver, monitor = make(LabelWriterDriverTwinTurbo)
    process_page_options(driver, monitor, PageHeader(media_type=PaperType.CONTINUOUS))
    assert driver.paper_type == PaperType.CONTINUOUS
    assert monitor.paper_type == PaperType.REGULAR