"""Unit tests for the station and status record decoders."""

from datetime import UTC, datetime

import pytest

from evsedata.decoding import (
    FieldCoercionError,
    FieldShapeError,
    MissingRequiredFieldError,
    UnknownEnumValueError,
    decode_station,
    decode_status_record,
)
from evsedata.decoding.station import decode_day
from evsedata.models import (
    AuthenticationMode,
    Day,
    DynamicInfoAvailable,
    EVSEStatus,
    PaymentOption,
)


@pytest.mark.unit
class TestDecodeStation:
    """Test decoding of a single station object."""

    def test_decodes_full_record(self, raw_station):
        """Test every field of a complete record is decoded."""
        station = decode_station(raw_station)

        assert station.charging_station_id == "CH*ABC*S1"
        assert station.evse_id == "CH*ABC*E123"
        assert station.address.city == "Bern"
        assert station.address.postal_code == "3011"
        assert station.coordinates == (46.948, 7.4391)
        assert station.is_open_24_hours is True
        assert station.renewable_energy is True
        assert station.dynamic_info_available is DynamicInfoAvailable.YES
        assert station.authentication_modes == [
            AuthenticationMode.NFC_RFID_CLASSIC,
            AuthenticationMode.REMOTE,
        ]
        assert station.payment_options == [PaymentOption.CONTRACT]
        assert station.plugs == ["Type 2 Outlet"]
        assert station.station_name == "Bern Hbf"
        assert station.hotline_phone_number == "+41800000000"
        assert station.delta_type == "insert"
        assert station.last_update == datetime(2025, 9, 30, 2, 15, 16, 965000, tzinfo=UTC)
        assert station.status is None

    def test_facility_numbers_may_be_strings(self, raw_station):
        """Test facility numbers given as strings are coerced."""
        facility = decode_station(raw_station).charging_facilities[0]

        assert facility.power == 22.0
        assert facility.amperage == 32.0
        assert facility.voltage == 400.0
        assert facility.power_type == "AC_3_PHASE"

    def test_is_open_24_hours_string_forms(self, station_factory):
        """Test IsOpen24Hours accepts boolean strings and names the field on failure."""
        assert decode_station(station_factory(IsOpen24Hours="TRUE")).is_open_24_hours is True
        assert decode_station(station_factory(IsOpen24Hours="false")).is_open_24_hours is False

        with pytest.raises(FieldCoercionError) as exc_info:
            decode_station(station_factory(IsOpen24Hours="yes"))
        assert exc_info.value.field == "IsOpen24Hours"
        assert exc_info.value.record_id == "CH*ABC*S1"

    def test_epoch_last_update(self, station_factory):
        """Test lastUpdate as epoch milliseconds."""
        station = decode_station(station_factory(lastUpdate=1730000000000))
        assert station.last_update.timestamp() == 1730000000

    def test_optional_fields_absent(self, raw_station):
        """Test absent optional fields decode to None or an empty list."""
        for key in ("PaymentOptions", "OpeningTimes", "ValueAddedServices", "lastUpdate"):
            del raw_station[key]
        del raw_station["ChargingStationNames"]

        station = decode_station(raw_station)

        assert station.payment_options is None
        assert station.opening_times is None
        assert station.value_added_services is None
        assert station.last_update is None
        assert station.charging_station_names == []
        assert station.station_name is None

    def test_names_as_bare_object(self, station_factory):
        """Test a single name object."""
        station = decode_station(
            station_factory(ChargingStationNames={"lang": "de", "value": "Bern Hbf"})
        )
        assert [n.value for n in station.charging_station_names] == ["Bern Hbf"]

    def test_names_as_array_of_two(self, station_factory):
        """Test a name array keeps its order."""
        station = decode_station(
            station_factory(
                ChargingStationNames=[
                    {"lang": "de", "value": "Bern Hbf"},
                    {"lang": "fr", "value": "Berne gare"},
                ]
            )
        )
        assert [n.lang for n in station.charging_station_names] == ["de", "fr"]

    def test_names_wrong_shape(self, station_factory):
        """Test a bare string is not a valid names value."""
        with pytest.raises(FieldShapeError):
            decode_station(station_factory(ChargingStationNames="Bern Hbf"))

    def test_unknown_authentication_mode_fails_record(self, station_factory):
        """Test an unknown authentication mode fails the whole record."""
        with pytest.raises(UnknownEnumValueError) as exc_info:
            decode_station(station_factory(AuthenticationModes=["REMOTE", "Mystery"]))

        assert exc_info.value.field == "AuthenticationModes"
        assert exc_info.value.raw_value == "Mystery"
        assert exc_info.value.record_id == "CH*ABC*S1"

    def test_enum_values_are_trimmed(self, station_factory):
        """Test enum values are matched after trimming."""
        station = decode_station(station_factory(PaymentOptions=[" No Payment "]))
        assert station.payment_options == [PaymentOption.NO_PAYMENT]

    def test_unknown_payment_option_fails_record(self, station_factory):
        """Test an unknown payment option fails the record."""
        with pytest.raises(UnknownEnumValueError):
            decode_station(station_factory(PaymentOptions=["Bitcoin"]))

    @pytest.mark.parametrize("value", ["TRUE", "yes", ""])
    def test_dynamic_info_is_case_sensitive(self, station_factory, value):
        """Test DynamicInfoAvailable only accepts exact values."""
        with pytest.raises(UnknownEnumValueError):
            decode_station(station_factory(DynamicInfoAvailable=value))

    def test_dynamic_info_auto(self, station_factory):
        """Test the auto value."""
        station = decode_station(station_factory(DynamicInfoAvailable="auto"))
        assert station.dynamic_info_available is DynamicInfoAvailable.AUTO

    def test_missing_required_field(self, raw_station):
        """Test a missing required field names the field and record."""
        del raw_station["Plugs"]

        with pytest.raises(MissingRequiredFieldError) as exc_info:
            decode_station(raw_station)

        assert exc_info.value.field == "Plugs"
        assert exc_info.value.record_id == "CH*ABC*S1"

    def test_missing_station_id_has_unknown_record(self, raw_station):
        """Test a record without id is reported as unknown."""
        del raw_station["ChargingStationId"]

        with pytest.raises(MissingRequiredFieldError) as exc_info:
            decode_station(raw_station)

        assert exc_info.value.record_id == "unknown"

    def test_nested_field_is_named_with_path(self, station_factory):
        """Test nested fields are reported with their dotted path."""
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            decode_station(station_factory(Address={"Street": "Bahnhofplatz", "Country": "CHE"}))

        assert exc_info.value.field == "Address.City"

    def test_renewable_energy_is_strict(self, station_factory):
        """Test RenewableEnergy rejects string booleans."""
        with pytest.raises(FieldCoercionError):
            decode_station(station_factory(RenewableEnergy="true"))

    def test_non_object_record(self):
        """Test a record that is not an object."""
        with pytest.raises(FieldCoercionError):
            decode_station(["CH*ABC*S1"])


@pytest.mark.unit
class TestOpeningTimes:
    """Test opening time decoding."""

    def test_period_object_or_list(self, station_factory):
        """Test Period as a single object or a list."""
        station = decode_station(
            station_factory(
                OpeningTimes=[
                    {"on": "Workdays", "Period": {"begin": "08:00", "end": "17:30"}},
                    {
                        "on": "Saturday",
                        "Period": [
                            {"begin": "08:00", "end": "12:00"},
                            {"begin": "13:00", "end": "16:00"},
                        ],
                    },
                ]
            )
        )

        workdays, saturday = station.opening_times
        assert workdays.on is Day.WORKDAYS
        assert [(p.begin, p.end) for p in workdays.periods] == [("08:00", "17:30")]
        assert saturday.on is Day.SATURDAY
        assert len(saturday.periods) == 2

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Monday", Day.MONDAY),
            ("tuesday", Day.TUESDAY),
            ("WEDNESDAY", Day.WEDNESDAY),
            ("Thursday", Day.THURSDAY),
            ("Friday ", Day.FRIDAY),
            ("saturday", Day.SATURDAY),
            ("Sunday", Day.SUNDAY),
            ("Workdays", Day.WORKDAYS),
            (" WEEKDAYS ", Day.WORKDAYS),
            ("Weekdays", Day.WORKDAYS),
            ("Everyday", Day.EVERYDAY),
            ("daily", Day.EVERYDAY),
            ("Daily", Day.EVERYDAY),
            ("All Days", Day.EVERYDAY),
            ("  all days", Day.EVERYDAY),
            ("AllDays", Day.EVERYDAY),
            ("Weekend", Day.WEEKEND),
            ("Weekends", Day.WEEKEND),
            ("\tweekends\n", Day.WEEKEND),
            ("Holidays", Day.UNKNOWN),
            ("All-Days", Day.UNKNOWN),
            ("", Day.UNKNOWN),
        ],
    )
    def test_day_aliases(self, raw, expected):
        """Test every day selector alias ignoring case and surrounding whitespace."""
        assert decode_day(raw) is expected

    def test_day_alias_through_station(self, station_factory):
        """Test an alias in a station record decodes to its canonical day."""
        station = decode_station(
            station_factory(OpeningTimes=[{"on": " Weekends ", "Period": {"begin": "09:00", "end": "18:00"}}])
        )

        assert station.opening_times[0].on is Day.WEEKEND

    def test_unknown_day_keeps_raw_value(self, station_factory):
        """Test an unknown day keeps the wire value."""
        station = decode_station(
            station_factory(OpeningTimes=[{"on": "Holidays", "Period": {"begin": "10:00", "end": "14:00"}}])
        )

        opening_time = station.opening_times[0]
        assert opening_time.on is Day.UNKNOWN
        assert opening_time.raw_day == "Holidays"

    def test_missing_period(self, station_factory):
        """Test an opening time without Period."""
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            decode_station(station_factory(OpeningTimes=[{"on": "Monday"}]))

        assert exc_info.value.field == "OpeningTimes.Period"


@pytest.mark.unit
class TestDecodeStatusRecord:
    """Test lenient status decoding."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Available", EVSEStatus.AVAILABLE),
            ("occupied", EVSEStatus.OCCUPIED),
            ("OutOfService", EVSEStatus.OUT_OF_SERVICE),
            ("EvseNotFound", EVSEStatus.UNKNOWN),
            ("Mystery", EVSEStatus.UNKNOWN),
        ],
    )
    def test_status_values(self, raw, expected):
        """Test status names map leniently with unknowns kept raw."""
        record = decode_status_record({"EvseID": "CH*ABC*E123", "EVSEStatus": raw})

        assert record.status is expected
        assert record.raw_status == raw

    def test_missing_evse_id(self):
        """Test a status record needs an EvseID."""
        with pytest.raises(MissingRequiredFieldError):
            decode_status_record({"EVSEStatus": "Available"}, "CH*ABC")
