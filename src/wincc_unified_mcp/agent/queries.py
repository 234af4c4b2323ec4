"""GraphQL documents sent to the WinCC Unified runtime."""

LOGIN_MUTATION = """
mutation LoginUser($username: String!, $password: String!) {
  login(username: $username, password: $password) {
    token
    expires
    user {
      id
      name
      fullName
      language
    }
    error {
      code
      description
    }
  }
}
"""

BROWSE_QUERY = """
query BrowseObjects(
  $nameFilters: [String],
  $objectTypeFilters: [ObjectTypesEnum],
  $baseTypeFilters: [String],
  $language: String
) {
  browse(
    nameFilters: $nameFilters,
    objectTypeFilters: $objectTypeFilters,
    baseTypeFilters: $baseTypeFilters,
    language: $language
  ) {
    name
    displayName
    objectType
    dataType
  }
}
"""

TAG_VALUES_QUERY = """
query GetTagValues($names: [String!]!, $directRead: Boolean) {
  tagValues(names: $names, directRead: $directRead) {
    name
    value {
      value
      timestamp
      quality {
        quality
        subStatus
        limit
        extendedSubStatus
        sourceQuality
        sourceTime
        timeCorrected
      }
    }
    error {
      code
      description
    }
  }
}
"""

LOGGED_TAG_VALUES_QUERY = """
query GetLoggedTagValues(
  $names: [String]!,
  $startTime: Timestamp,
  $endTime: Timestamp,
  $maxNumberOfValues: Int,
  $sortingMode: LoggedTagValuesSortingModeEnum,
  $boundingValuesMode: LoggedTagValuesBoundingModeEnum
) {
  loggedTagValues(
    names: $names,
    startTime: $startTime,
    endTime: $endTime,
    maxNumberOfValues: $maxNumberOfValues,
    sortingMode: $sortingMode,
    boundingValuesMode: $boundingValuesMode
  ) {
    loggingTagName
    error {
      code
      description
    }
    values {
      value {
        value
        timestamp
      }
    }
  }
}
"""

ACTIVE_ALARMS_QUERY = """
query GetActiveAlarms(
  $systemNames: [String],
  $filterString: String,
  $filterLanguage: String,
  $languages: [String]
) {
  activeAlarms(
    systemNames: $systemNames,
    filterString: $filterString,
    filterLanguage: $filterLanguage,
    languages: $languages
  ) {
    name
    instanceID
    raiseTime
    acknowledgmentTime
    clearTime
    modificationTime
    state
    priority
    eventText
    infoText
    languages
  }
}
"""

LOGGED_ALARMS_QUERY = """
query GetLoggedAlarms(
  $systemNames: [String],
  $filterString: String,
  $filterLanguage: String,
  $languages: [String],
  $startTime: Timestamp,
  $endTime: Timestamp,
  $maxNumberOfResults: Int
) {
  loggedAlarms(
    systemNames: $systemNames,
    filterString: $filterString,
    filterLanguage: $filterLanguage,
    languages: $languages,
    startTime: $startTime,
    endTime: $endTime,
    maxNumberOfResults: $maxNumberOfResults
  ) {
    name
    instanceID
    raiseTime
    acknowledgmentTime
    clearTime
    resetTime
    modificationTime
    state
    priority
    eventText
    infoText
    languages
  }
}
"""

WRITE_TAG_VALUES_MUTATION = """
mutation WriteTagValues(
  $input: [TagValueInput]!,
  $timestamp: Timestamp,
  $quality: QualityInput
) {
  writeTagValues(input: $input, timestamp: $timestamp, quality: $quality) {
    name
    error {
      code
      description
    }
  }
}
"""

ACKNOWLEDGE_ALARMS_MUTATION = """
mutation AcknowledgeAlarms($input: [AlarmIdentifierInput]!) {
  acknowledgeAlarms(input: $input) {
    alarmName
    alarmInstanceID
    error {
      code
      description
    }
  }
}
"""

RESET_ALARMS_MUTATION = """
mutation ResetAlarms($input: [AlarmIdentifierInput]!) {
  resetAlarms(input: $input) {
    alarmName
    alarmInstanceID
    error {
      code
      description
    }
  }
}
"""
