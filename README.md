# roastkit

Pure-Python building blocks for a coffee roaster controller:

- `roastkit.typek`: ITS-90 type K thermocouple linearisation, with cold-junction compensation (`TypeK`, `c_to_f`, `f_to_c`, `ThermocoupleRangeError`).
- `roastkit.adc`: an MCP3424 ADC driver (`MCP3424`, with `Resolution`, `Gain` and `Conversion`) and an integer RC smoothing filter (`RCFilter`). The driver works over any object that provides the `I2CBus` interface.
- `roastkit.ambient`: an MCP9800 ambient temperature sensor (`MCP9800`, with `AmbientResolution` and `ConversionMode`). It has filtering and a calibration offset.
- `roastkit.ds18b20`: a DS18B20 one-wire temperature sensor (`DS18B20`) and the Dallas/Maxim `crc8`. The sensor works over any object that provides the `OneWireBus` interface.
- `roastkit.triac`: two-channel phase-angle triac control with an integral-cycle output (`TriacDimmer`, `Channel`).
- `roastkit.serial_command`: a line-oriented command tokenizer with handler dispatch (`CommandParser`).

## Installation

```
pip install roastkit
```

## Thermocouple conversion

```python
from roastkit.typek import TypeK, ThermocoupleRangeError

tc = TypeK()
print(tc.temp_c(4.096))            # tip temperature referenced to 0 °C
print(tc.temp_c(3.0, amb_c=22.5))  # with cold-junction compensation
print(tc.temp_f(3.0, amb_f=72.5))  # the same in Fahrenheit
print(tc.mv_c(25.0))               # emf produced at a junction temperature

try:
    tc.temp_c(80.0)
except ThermocoupleRangeError:
    print("reading out of range")
```

A voltage or temperature outside the type K tables raises `ThermocoupleRangeError`, which is a `ValueError`. `inrange_mv`, `inrange_c` and `inrange_f` check a value first.

## MCP3424 ADC

```python
from roastkit.adc import MCP3424, Resolution, Gain, Conversion

adc = MCP3424(bus)  # bus has write(address, data) and read(address, count)
adc.configure(Resolution.BITS_18, Gain.GAIN_8, Conversion.ONE_SHOT)
adc.set_calibration(1.0, 0)  # gain factor, offset in microvolts
adc.start_conversion(0)      # channel 0 to 3
# wait adc.conversion_time() milliseconds
microvolts = adc.read_microvolts()
```

If the bus returns fewer bytes than requested, `read_microvolts` raises `OSError`.

`RCFilter(level)` smooths a stream of integers. `level` is a percentage: 0 passes input straight through, and higher values smooth more. `filter(x)` returns the new output. `reset(level)` sets a new level and restarts the filter from the next sample.

## MCP9800 ambient sensor

```python
from roastkit.ambient import MCP9800, AmbientResolution, ConversionMode

amb = MCP9800(bus)
amb.setup(90, ConversionMode.ONE_SHOT)  # 90 % filtering; shuts the chip down
amb.configure(AmbientResolution.BITS_12)
amb.offset = 0.0                        # calibration correction in °C
amb.start_conversion()
# wait amb.conversion_time() milliseconds
amb.read()
print(amb.ambient_c(), amb.ambient_f())
```

The conversion mode passed to `setup` only takes effect in the configuration byte at the next call to `configure`.

## DS18B20 sensor

```python
from roastkit.ds18b20 import DS18B20, DeviceDisconnectedError, CrcError

sensor = DS18B20(one_wire_bus, resolution=12)
if sensor.begin():
    sensor.crc_check = True   # read the full scratchpad and verify it
    sensor.request_temperatures()
    while not sensor.is_conversion_complete():
        pass
    try:
        print(sensor.temp_c(), sensor.address().hex())
    except (DeviceDisconnectedError, CrcError) as exc:
        print("read failed:", exc)
```

`temp_c` raises `DeviceDisconnectedError` if the sensor cannot be found or reports a temperature below −55 °C. With `crc_check` set, it raises `CrcError` if the scratchpad fails its check. `offset` is added to every Celsius reading. `begin` clears `crc_check`.

## Triac phase control

```python
from roastkit.triac import TriacDimmer, Channel

dimmer = TriacDimmer(write_pin=lambda pin, level: print(pin, level))
dimmer.begin()
dimmer.set_duty(9, 60)          # heater on pin 9 at 60 % power
dimmer.set_brightness(10, 0.5)  # fan on pin 10 at half brightness
dimmer.set_icc(25)              # integral-cycle output at 25 %

pulses = dimmer.zero_crossing(capture)  # call on every mains zero crossing
for channel, (start, stop) in pulses.items():
    print(channel.name, start, stop)
```

Only pins 9 and 10 are accepted; any other pin raises `ValueError`. `zero_crossing` raises `RuntimeError` before `begin` or after `end`. It measures `period` from successive captures and returns the trigger pulse times of the enabled channels. It also drives the integral-cycle pin (7) through `write_pin`.

## Commands

```python
from roastkit.serial_command import CommandParser

parser = CommandParser()
parser.add_command("OT1", lambda: print("heater", parser.next_token()))
parser.set_default_handler(lambda cmd: print("unknown", cmd))
parser.feed("ot1;75\n")
print(parser.commands())
```

Incoming letters are upper-cased and non-printable characters are dropped. Each line holds at most 32 characters. Tokens are split on `;` by default, and lines end with a newline by default. Only the first 12 characters of a command name are significant.

## What the package does not do

roastkit does not open serial ports, I2C buses or one-wire buses, and it does not drive pins. You supply objects that do that; in tests and simulations they can be plain Python fakes. The package has no command-line program and no main control loop. It provides the pieces from which such a controller is built.

## Tests

```
pip install roastkit[test]
pytest
```