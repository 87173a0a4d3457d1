# dymolw

`dymolw` turns 1-bit raster label images into the command stream that DYMO
LabelWriter printers understand. It has no third-party dependencies.

## What is in it

- **`dymolw.environment`**: the interfaces that connect the parts.
  - `PrintEnvironment` is the channel to the printer. It has `write_data`,
    `read_data` and a `job_status` attribute that holds a `JobStatus`.
  - `PrinterDriver` and `LanguageMonitor` are the abstract driver and monitor.
  - `MemoryPrintEnvironment` collects every write in memory. Its `writes`
    attribute holds them one by one, and its `data` property joins them.
    `clear()` forgets them. It returns queued replies from `read_data`; pass
    them in with `responses=`. When no replies are left it returns `b""`.
- **`dymolw.driver`**: the drivers.
  - `LabelWriterDriver` is the basic driver. It ends each page with a form
    feed (`ESC E`).
  - `LabelWriterDriver400` ends each page with a short form feed (`ESC G`).
    It ends each document with a form feed.
  - `LabelWriterDriverTwinTurbo` also selects a roll (`Roll.AUTO`, `LEFT` or
    `RIGHT`) at the start of each document.
  - Each driver has these attributes: `resolution` (`Resolution`), `density`
    (`Density`), `quality` (`Quality`), `paper_type` (`PaperType`),
    `page_height`, `page_offset` (an `(x, y)` tuple; only a positive `x` is
    used, to shift lines right) and `max_print_width` (in bytes; longer lines
    are cut short).
  - Empty lines are collected and sent as skip-line commands. Other lines get
    a dot tab for their leading blank bytes. A line is sent run-length
    compressed when that is shorter, and as-is otherwise.
  - Helpers: `reset_command()`, `request_status_command()`,
    `short_form_feed_command()`, `roll_select_command(roll)`,
    `compress_line(data)` and `shift_line(data, width, shift)`.
- **`dymolw.monitor`**: `LabelWriterLanguageMonitor`.
  - It keeps the data of the current label and reads the printer's status
    byte (see `StatusBit`).
  - On an error, a roll change or a missing top-of-form, it sets the job
    status and polls until paper is in. It then sends the label again.
  - Status is checked only when `is_local()` is true. That is when the
    `DEVICE_URI` environment variable is unset or starts with `usb://`.
  - Each status check waits up to `read_status_timeout` seconds (10 by default).
- **`dymolw.options`**: applying settings to a driver.
  - `process_ppd_options(driver, monitor, choices, model_name)` takes a
    mapping of option keywords to chosen values. It reads `Resolution`,
    `DymoPrintQuality`, `DymoPrintDensity` and, for Twin Turbo drivers,
    `InputSlot`. Values are matched without regard to case.
  - It also applies the maximum print width of the 300-series, 4XL and SE450
    models.
  - `process_page_options(driver, monitor, header)` applies a `PageHeader`:
    media type, page height from page size and resolution, and horizontal
    offset.
- **`dymolw.filter`**: running a whole document.
  - `select_driver_class(model_name)` picks the driver class for a model name.
  - `LabelWriterFilter(environment, model_name, choices)` sends a document of
    `RasterPage` objects through that driver and a language monitor.
  - `run(pages)` returns the number of pages started.

## Example: driver only

```python
from dymolw.environment import MemoryPrintEnvironment
from dymolw.driver import Density, LabelWriterDriver400

env = MemoryPrintEnvironment()
driver = LabelWriterDriver400(env)
driver.density = Density.HIGH

driver.start_doc()
driver.start_page()
for _ in range(10):
    driver.process_raster_line(bytes([0xFF] * 12))
driver.end_page()
driver.end_doc()

commands = env.data
```

## Example: whole document

```python
from dymolw.environment import MemoryPrintEnvironment
from dymolw.filter import LabelWriterFilter, RasterPage
from dymolw.options import PageHeader

# Each status check is answered with "top of form" (0x02).
env = MemoryPrintEnvironment(responses=[b"\x02", b"\x02"])
label_filter = LabelWriterFilter(
    env,
    model_name="DYMO LabelWriter 450",
    choices={"Resolution": "203dpi", "DymoPrintDensity": "Dark"},
)
header = PageHeader(
    bytes_per_line=12, height=10, page_size=(90, 252), hw_resolution=(300, 300)
)
page = RasterPage(header, [bytes([0xFF] * 12)] * 10)
pages_started = label_filter.run([page])  # 1
```

## What it does not do

- There is no command-line program.
- It does not read raster files or PPD files. The caller builds the
  `RasterPage` and `PageHeader` objects and passes the chosen options as a
  plain mapping.
- It does not halftone. `LabelWriterFilter.run` raises `ValueError` for a
  page with more than one bit per pixel.
- It opens no device. All output goes through the `PrintEnvironment` you
  supply.