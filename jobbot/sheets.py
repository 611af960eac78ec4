"""Google Sheets API client for storing job applications."""

import logging
from typing import Optional

from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from .config import Config
from .models import SHEET_HEADERS, ApplicationRecord
from .storage import StorageError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

HEADER_RANGE = "A1:G1"
DATA_RANGE = "A:G"


def get_credentials(config: Config):
    """Get Sheets API credentials.

    A service account from the config is preferred. Otherwise the installed
    app OAuth flow is used, caching the token next to credentials.json.
    """
    if config.uses_service_account:
        return service_account.Credentials.from_service_account_info(
            {
                "client_email": config.service_account_email,
                "private_key": config.private_key,
                "token_uri": TOKEN_URI,
            },
            scopes=SCOPES,
        )

    token_path = config.credentials_dir / "sheets_token.json"
    credentials_path = config.credentials_dir / "credentials.json"

    creds = None

    if token_path.exists():
        creds = Credentials.from_authorized_user_file(str(token_path), SCOPES)

    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            logger.info("Refreshing expired Sheets credentials")
            creds.refresh(Request())
        else:
            if not credentials_path.exists():
                raise FileNotFoundError(
                    f"Credentials file not found: {credentials_path}. "
                    "Set GOOGLE_SERVICE_ACCOUNT_EMAIL and GOOGLE_PRIVATE_KEY, "
                    "or download credentials.json from Google Cloud Console."
                )
            logger.info("Starting OAuth flow for Sheets")
            flow = InstalledAppFlow.from_client_secrets_file(
                str(credentials_path), SCOPES
            )
            creds = flow.run_local_server(port=0)

        with open(token_path, "w") as token:
            token.write(creds.to_json())
            logger.info(f"Saved Sheets credentials to {token_path}")

    return creds


class SheetsStore:
    """Application store backed by a single Google Sheets tab."""

    def __init__(self, config: Config):
        if not config.spreadsheet_id:
            raise ValueError("SheetsStore requires a spreadsheet_id")
        self.spreadsheet_id = config.spreadsheet_id
        self.sheet_name = config.sheet_name
        self._config = config
        self._creds = None

    def _service(self):
        # Service objects are not thread safe, so each call builds its own
        if self._creds is None or not self._creds.valid:
            self._creds = get_credentials(self._config)
        return build("sheets", "v4", credentials=self._creds, cache_discovery=False)

    def _range(self, cells: str) -> str:
        return f"{self.sheet_name}!{cells}"

    def ensure_headers(self, service) -> None:
        """Write the header row if row 1 is empty. Existing rows are never overwritten."""
        result = (
            service.spreadsheets()
            .values()
            .get(spreadsheetId=self.spreadsheet_id, range=self._range(HEADER_RANGE))
            .execute()
        )

        existing = result.get("values", [[]])[0] if result.get("values") else []

        if existing and existing != SHEET_HEADERS:
            logger.warning(
                f"Row 1 of {self.sheet_name!r} is not the expected header row, "
                "leaving it as is"
            )
        elif not existing:
            service.spreadsheets().values().update(
                spreadsheetId=self.spreadsheet_id,
                range=self._range(HEADER_RANGE),
                valueInputOption="RAW",
                body={"values": [SHEET_HEADERS]},
            ).execute()
            self._format_headers(service)
            logger.info("Added headers to spreadsheet")

    def _sheet_id(self, service) -> Optional[int]:
        metadata = (
            service.spreadsheets()
            .get(spreadsheetId=self.spreadsheet_id, fields="sheets.properties")
            .execute()
        )
        for sheet in metadata.get("sheets", []):
            properties = sheet.get("properties", {})
            if properties.get("title") == self.sheet_name:
                return properties.get("sheetId")
        return None

    def _format_headers(self, service) -> None:
        """Bold the header row on a light grey background."""
        sheet_id = self._sheet_id(service)
        if sheet_id is None:
            logger.warning(f"Sheet {self.sheet_name!r} not found, skipping header formatting")
            return

        service.spreadsheets().batchUpdate(
            spreadsheetId=self.spreadsheet_id,
            body={
                "requests": [
                    {
                        "repeatCell": {
                            "range": {
                                "sheetId": sheet_id,
                                "startRowIndex": 0,
                                "endRowIndex": 1,
                                "startColumnIndex": 0,
                                "endColumnIndex": len(SHEET_HEADERS),
                            },
                            "cell": {
                                "userEnteredFormat": {
                                    "textFormat": {"bold": True},
                                    "backgroundColor": {
                                        "red": 0.9,
                                        "green": 0.9,
                                        "blue": 0.9,
                                    },
                                }
                            },
                            "fields": "userEnteredFormat(textFormat,backgroundColor)",
                        }
                    }
                ]
            },
        ).execute()

    def append(self, record: ApplicationRecord) -> bool:
        """Append an application row. Returns False if the write failed."""
        try:
            service = self._service()
            self.ensure_headers(service)
            service.spreadsheets().values().append(
                spreadsheetId=self.spreadsheet_id,
                range=self._range(DATA_RANGE),
                valueInputOption="RAW",
                insertDataOption="INSERT_ROWS",
                body={"values": [record.to_row()]},
            ).execute()
        except Exception as e:
            logger.error(f"Failed to append row to spreadsheet: {e}")
            return False

        logger.info(f"Appended row to spreadsheet: {record.company} - {record.role}")
        return True

    def list_all(self) -> list[ApplicationRecord]:
        """Read every application row below the header, in sheet order."""
        try:
            result = (
                self._service()
                .spreadsheets()
                .values()
                .get(spreadsheetId=self.spreadsheet_id, range=self._range(DATA_RANGE))
                .execute()
            )
        except Exception as e:
            raise StorageError(f"Failed to read spreadsheet: {e}") from e

        records = []
        for row in result.get("values", [])[1:]:
            if not any(str(cell).strip() for cell in row):
                continue
            try:
                records.append(ApplicationRecord.from_row(row))
            except ValueError as e:
                logger.warning(f"Skipping unreadable spreadsheet row {row}: {e}")
        return records
